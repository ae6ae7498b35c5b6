"""Configure test suite environment"""
import os
import sys

# Make the tsw_tracker package importable without installing it
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)

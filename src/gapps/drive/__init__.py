"""
Google Drive v3: files, properties and permissions, plus running list
queries singly or batched.
"""

from . import mime_types
from .resources import DriveFile, Permission, Property, is_folder
from .queries import DriveQuery, build_request, quote, parents_query
from .batch import execute, execute_batch, execute_batch_requests
from .ops import *

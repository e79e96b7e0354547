#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package hust provides discovery and control of networked lighting bridges
"""

# import importlib.metadata as _metadata
# __version = _metadata.version(__package__) #  e.g., '0.1.0'


# The following line is automatically updated with "semantic-release version"
__version__ =  "0.3.0"


__all__ = [ '__version__' ]

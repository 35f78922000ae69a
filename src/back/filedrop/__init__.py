"""filedrop: upload, list, rename and download files on a local directory."""

__version__ = '0.1.0'

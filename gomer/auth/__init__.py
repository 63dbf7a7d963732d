"""Namespace for access control; it holds no modules at present."""
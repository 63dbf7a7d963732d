"""Binding configuration, base64 tool functions and stash helpers."""
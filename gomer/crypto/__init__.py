"""Envelope encryption using KMS-style data keys."""
"""Composable validation constraints over values, mappings and sequences."""
"""Date, decimal, day count and root-finding helpers."""

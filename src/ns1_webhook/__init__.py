"""cert-manager DNS-01 webhook solver for NS1."""

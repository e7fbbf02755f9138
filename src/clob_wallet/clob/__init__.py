"""HTTP access to the CLOB: plain JSON calls and L2-authenticated requests."""

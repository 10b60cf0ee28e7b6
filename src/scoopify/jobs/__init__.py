"""Background job implementations executed by the RQ worker."""

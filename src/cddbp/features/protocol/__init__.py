"""CDDBP protocol feature: domain records and the client use cases."""

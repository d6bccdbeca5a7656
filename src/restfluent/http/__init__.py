"""HTTP value types — the request the host hands in and the response it sends back."""

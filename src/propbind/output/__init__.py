"""Human (rich) and machine (JSON) rendering of service results."""

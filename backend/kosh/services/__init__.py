"""Business services; each wraps one AsyncSession and commits its own unit of work."""

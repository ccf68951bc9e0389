"""Business logic services used by handlers.

Services are built lazily by handlers so that DynamoDB resources are only
created on the first request of a cold Lambda.
"""

# Do NOT import services here - use lazy loading in handlers instead

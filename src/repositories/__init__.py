"""DynamoDB repositories for tickets, events and users."""

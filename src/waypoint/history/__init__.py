"""History — session-history synchronization and the interception protocol."""

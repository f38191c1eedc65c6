"""UltraSense - ultrasonic distance ingestion and push alerting backend."""

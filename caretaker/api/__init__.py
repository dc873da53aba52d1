"""HTTP ingestion gateway for device-reported alerts."""

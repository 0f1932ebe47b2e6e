"""
Worker Lambda handlers for scheduled processing.

Workers:
- sync_worker: Runs a source, group, Indeed batch, scrape or duplicate cleanup
  from an EventBridge event
"""

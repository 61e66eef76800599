"""Draft/sent email lifecycle backed by SQLite and the Gmail API."""

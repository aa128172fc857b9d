"""YouTube Podcast Sync - turn channel uploads into podcast feeds."""

"""aiohttp web layer for icsgantt."""

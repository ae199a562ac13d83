"""File paths configuration"""

import os
import sys
from pathlib import Path


class CachePaths:
    """Data directory and reference map locations"""

    # Source file (can be in data directory or root)
    REFERENCE_MAP_FILE = 'reference_map.png'

    # Environment override for the reference map location
    REFERENCE_MAP_ENV = 'MAP_LOCATOR_REFERENCE_MAP'

    @property
    def DATA_DIR(self):
        return Path('data')

    def reference_map_locations(self):
        """Candidate reference map locations, in search order"""
        locations = []

        # 1. Explicit override
        override = os.getenv(self.REFERENCE_MAP_ENV)
        if override:
            locations.append(Path(override))

        # 2. Current working directory
        locations.append(Path(self.REFERENCE_MAP_FILE))

        # 3. data/ subdirectory (development structure)
        locations.append(self.DATA_DIR / self.REFERENCE_MAP_FILE)

        # 4. Per-user application data
        if sys.platform == 'win32':
            appdata = os.getenv('APPDATA')
        elif sys.platform == 'darwin':
            appdata = os.path.expanduser('~/Library/Application Support')
        else:
            appdata = os.path.expanduser('~/.local/share')

        if appdata:
            locations.append(Path(appdata) / 'map-locator' / 'data' / self.REFERENCE_MAP_FILE)

        return locations

    def find_reference_map(self):
        """Look for the reference map in all known locations"""
        from config import settings

        locations = self.reference_map_locations()

        if settings.DEBUG:
            print("[DEBUG] Searching for reference map in the following locations:")
            for i, location in enumerate(locations, 1):
                exists = "[OK] FOUND" if location.exists() else "[ERROR] NOT FOUND"
                print(f"  {i}. {location} [{exists}]")

        for location in locations:
            if location.exists():
                return location

        print(f"[ERROR] Reference map not found in any of the {len(locations)} locations checked!")
        return None


# Create singleton instance
CACHE_PATHS = CachePaths()

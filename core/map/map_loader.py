"""Reference map loading"""

import cv2
import numpy as np
from pathlib import Path
from typing import Optional, Union
from config import CACHE_PATHS


class MapLoader:
    """Handles reference map loading"""

    @staticmethod
    def load_map(path: Optional[Union[str, Path]] = None) -> Optional[np.ndarray]:
        """
        Load the reference map as grayscale.

        Args:
            path: Explicit map file; when None the configured locations are searched

        Returns:
            Grayscale map, or None if loading fails
        """
        if path is not None:
            source = Path(path)
            if not source.exists():
                print(f"[MapLoader] ERROR: Reference map not found: {source}")
                return None
        else:
            source = CACHE_PATHS.find_reference_map()
            if source is None:
                print("Please place 'reference_map.png' in one of these locations:")
                for location in CACHE_PATHS.reference_map_locations():
                    print(f"  - {location}")
                return None

        print(f"Loading reference map from: {source}")
        full_map = cv2.imread(str(source), cv2.IMREAD_GRAYSCALE)
        if full_map is None or full_map.size == 0:
            print(f"[MapLoader] ERROR: Could not decode reference map: {source}")
            return None

        print(f"Map shape: {full_map.shape}")
        return full_map

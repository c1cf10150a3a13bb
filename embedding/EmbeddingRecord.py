# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import numpy as np

from content.HSKContent import SourceType


@dataclass
class EmbeddingRecord:
    """Embedding vector + the normalized text it was built from + searchable metadata."""
    id: int
    source_type: SourceType
    source_id: int
    content_text: str
    vector: np.ndarray
    metadata: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    generation_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def dim(self) -> int:
        return int(self.vector.shape[0])

    @property
    def hsk_level(self) -> Optional[int]:
        return (self.metadata or {}).get("hskLevel")

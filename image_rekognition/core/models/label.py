"""
Label domain entities.
A LabelRecord is the detection result for one image, keyed by image identifier.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, List, Optional


@dataclass(frozen=True)
class DetectedLabel:
    """One label returned by the detection service."""
    name: str
    confidence: float


@dataclass
class LabelRecord:
    """
    Detection result for one image.

    image_id is the partition key and always equals the source storage key
    minus the upload prefix.
    """
    image_id: str
    labels: List[DetectedLabel]
    source_key: str
    resized_key: Optional[str] = None
    detected_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def create(cls, image_id: str, source_key: str, labels: List[DetectedLabel],
               resized_key: Optional[str] = None) -> 'LabelRecord':
        """
        Build a record with labels ordered by confidence, highest first.
        Duplicate label names keep their highest confidence.
        """
        best: Dict[str, DetectedLabel] = {}
        for label in labels:
            current = best.get(label.name)
            if current is None or label.confidence > current.confidence:
                best[label.name] = label
        ordered = sorted(best.values(), key=lambda label: label.confidence, reverse=True)
        return cls(
            image_id=image_id,
            labels=ordered,
            source_key=source_key,
            resized_key=resized_key,
        )

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]

    def to_item(self, partition_key: str = "image") -> Dict[str, Any]:
        """Serialize to a DynamoDB item. Floats are stored as Decimal."""
        return {
            partition_key: self.image_id,
            "labels": self.label_names,
            "confidence": {
                label.name: Decimal(str(round(label.confidence, 2)))
                for label in self.labels
            },
            "source_key": self.source_key,
            "resized_key": self.resized_key,
            "detected_at": self.detected_at,
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any], partition_key: str = "image") -> 'LabelRecord':
        confidence = item.get("confidence", {})
        labels = [
            DetectedLabel(name=name, confidence=float(confidence.get(name, 0)))
            for name in item.get("labels", [])
        ]
        return cls(
            image_id=item[partition_key],
            labels=labels,
            source_key=item.get("source_key", ""),
            resized_key=item.get("resized_key"),
            detected_at=item.get("detected_at", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation returned by the Front-End API."""
        return {
            "image": self.image_id,
            "labels": self.label_names,
            "confidence": {label.name: label.confidence for label in self.labels},
            "source_key": self.source_key,
            "resized_key": self.resized_key,
            "detected_at": self.detected_at,
        }

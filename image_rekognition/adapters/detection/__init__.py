from .rekognition_label_detector import RekognitionLabelDetector

__all__ = ["RekognitionLabelDetector"]

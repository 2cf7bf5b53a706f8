"""
Machine Learning Module

Provides face embedding and cloud celebrity recognition backends:
- SFaceEmbedder: YuNet detection + SFace 128-dim embeddings (OpenCV)
- RekognitionCelebrityClient: AWS Rekognition celebrity recognition

Usage:
    from celeb_lookalike.ml import get_embedding_provider

    embedder = get_embedding_provider()
    vector = embedder.embed(image)   # None when no face is found
"""

from .inference import (
    EmbeddingProvider,
    SFaceEmbedder,
    freeze_vector,
    get_embedding_provider,
)
from .celebrity_api import (
    CelebrityCandidate,
    RekognitionCelebrityClient,
)
from .download_models import download_model, download_all

__all__ = [
    'EmbeddingProvider',
    'SFaceEmbedder',
    'freeze_vector',
    'get_embedding_provider',
    'CelebrityCandidate',
    'RekognitionCelebrityClient',
    'download_model',
    'download_all',
]

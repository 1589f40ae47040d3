from .s3 import S3Client

__all__ = ["S3Client"]

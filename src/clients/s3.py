"""
Client for uploading generated report PDFs to S3.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.config import settings

logger = logging.getLogger(__name__)


class S3Client:
    """Thin async wrapper over a boto3 S3 client."""

    def __init__(
        self,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        client: Any = None,
    ):
        self.bucket = bucket or settings.AWS_BUCKET_NAME
        self.region = region or settings.AWS_REGION
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            )
        return self._client

    def location(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def _put(self, body: bytes, key: str) -> Dict[str, Any]:
        return self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType="application/pdf",
            Metadata={
                "uploaded-by": settings.S3_UPLOADED_BY,
                "generated-at": datetime.now(timezone.utc).isoformat(),
            },
        )

    async def upload_pdf(self, body: bytes, key: str) -> Dict[str, Any]:
        """
        Upload a PDF.

        Returns:
            {"success": True, "key", "location", "etag"} or
            {"success": False, "error": message}
        """
        try:
            response = await asyncio.to_thread(self._put, body, key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            return {"success": False, "error": str(e)}

        logger.info(f"Uploaded {key} to s3://{self.bucket} ({len(body)} bytes)")
        return {
            "success": True,
            "key": key,
            "location": self.location(key),
            "etag": (response or {}).get("ETag"),
        }

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from src.clients import S3Client

pytestmark = pytest.mark.anyio


class RecordingClient:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"ETag": '"etag-1"'}


async def test_upload_pdf():
    fake = RecordingClient()
    s3 = S3Client(bucket="reports", region="ap-southeast-2", client=fake)

    result = await s3.upload_pdf(b"%PDF", "1700000000000.pdf")

    assert result == {
        "success": True,
        "key": "1700000000000.pdf",
        "location": "https://reports.s3.ap-southeast-2.amazonaws.com/1700000000000.pdf",
        "etag": '"etag-1"',
    }
    call = fake.calls[0]
    assert call["Bucket"] == "reports"
    assert call["Key"] == "1700000000000.pdf"
    assert call["Body"] == b"%PDF"
    assert call["ContentType"] == "application/pdf"
    assert set(call["Metadata"]) == {"uploaded-by", "generated-at"}


async def test_upload_pdf_client_error():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject")
    s3 = S3Client(bucket="reports", client=RecordingClient(error=error))

    result = await s3.upload_pdf(b"%PDF", "a.pdf")

    assert result["success"] is False
    assert "AccessDenied" in result["error"]


async def test_upload_pdf_connection_error():
    error = EndpointConnectionError(endpoint_url="https://reports.s3.amazonaws.com")
    s3 = S3Client(bucket="reports", client=RecordingClient(error=error))

    result = await s3.upload_pdf(b"%PDF", "a.pdf")

    assert result["success"] is False
    assert "reports.s3.amazonaws.com" in result["error"]

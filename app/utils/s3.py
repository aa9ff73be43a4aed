# app/utils/s3.py
import boto3
from app.core.config import settings


def get_s3_client():
    if not settings.S3_BUCKET:
        raise RuntimeError("S3 not configured")
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT,
        region_name=settings.S3_REGION,
        aws_access_key_id=settings.S3_ACCESS_KEY,
        aws_secret_access_key=settings.S3_SECRET_KEY,
    )

# utils/blob_storage.py
from azure.storage.blob import BlobServiceClient
import os
import uuid

PROPERTY_IMAGES_CONTAINER = os.getenv("PROPERTY_IMAGES_CONTAINER", "property-images")

_blob_service = None


def get_blob_service() -> BlobServiceClient:
     """Client built on first use so importing this module needs no credentials."""
     global _blob_service
     if _blob_service is None:
          account = os.getenv("AZURE_STORAGE_ACCOUNT")
          key = os.getenv("AZURE_STORAGE_KEY")
          _blob_service = BlobServiceClient.from_connection_string(
               f"DefaultEndpointsProtocol=https;"
               f"AccountName={account};"
               f"AccountKey={key};"
               f"EndpointSuffix=core.windows.net"
          )
     return _blob_service


def upload_to_blob(file, container: str, prefix: str | int) -> str:
     ext = os.path.splitext(file.filename)[1]
     filename = f"{prefix}/{uuid.uuid4()}{ext}"
     blob_client = get_blob_service().get_blob_client(container=container, blob=filename)
     blob_client.upload_blob(file.file, overwrite=True)
     return blob_client.url


def delete_from_blob(blob_url: str):
     """
     Deletes a file from Azure Blob Storage using its full URL
     """
     parts = blob_url.split("/")
     container = parts[3]
     blob_name = "/".join(parts[4:])
     blob_client = get_blob_service().get_blob_client(
          container=container,
          blob=blob_name
     )
     blob_client.delete_blob()

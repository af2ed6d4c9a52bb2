"""Services for artifact_uploader module."""
from .auth import basic_auth_header, encode_auth_token
from .endpoint import build_upload_url
from .labels import default_labels, split_labels
from .locators import ClassifierLocator, FileNameLocator, get_locator
from .resolver import DescriptorResolver
from .settings import ServerCredentials, UploadManifest, load_credentials, load_manifest
from .uploader import MultipartUploader

__all__ = [
    "basic_auth_header",
    "encode_auth_token",
    "build_upload_url",
    "default_labels",
    "split_labels",
    "ClassifierLocator",
    "FileNameLocator",
    "get_locator",
    "DescriptorResolver",
    "ServerCredentials",
    "UploadManifest",
    "load_credentials",
    "load_manifest",
    "MultipartUploader",
]

from .http_blob_store import BucketNotFound, HttpBlobStore

__all__ = ['BucketNotFound', 'HttpBlobStore']

"""HTTP API for uploading documents and chatting with them."""

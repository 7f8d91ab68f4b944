"""Application entry point for FastAPI server."""
import uvicorn

if __name__ == "__main__":
    print("\n" + "="*60)
    print("  Document Operations API v1.0")
    print("="*60)
    print("\nEndpoints:")
    print("  POST /api/uploadfiles            - Upload a file (multipart or JSON/base64)")
    print("  POST /api/calldocumentoperations - Extract and index a stored file")
    print("  GET  /api/documentsearch         - Search documents (also POST)")
    print("  POST /api/capturefilecontent     - Create/update container and search index")
    print("  GET  /health                     - Health check")
    print("\nAPI Docs: http://localhost:8000/docs")
    print("="*60 + "\n")

    # Use import string format to enable reload mode
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

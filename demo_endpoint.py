"""
Quick demo script to run the GradPath API locally.

This script starts a local server and shows how to make requests to it.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting GradPath Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:   GET  http://localhost:8000/health")
    print("   - Search:         POST http://localhost:8000/recommendations/query")
    print("   - Email draft:    POST http://localhost:8000/recommendations/email-draft")
    print("   - New session:    POST http://localhost:8000/sessions")
    print("   - Load more:      POST http://localhost:8000/sessions/{id}/load-more")
    print("   - API Docs:            http://localhost:8000/docs")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/recommendations/query" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"profile": {"name": "Ada", "major": "CS", "degreeLevel": "BSc", '
          '"gpa": "3.9/4.0", "researchInterests": "robot learning", "targetDegree": "PhD", '
          '"targetLocations": "USA", "experience": "RA for 1 year"}}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "gradpath.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

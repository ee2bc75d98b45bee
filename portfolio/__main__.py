"""
Run the portfolio API with uvicorn: ``python -m portfolio``
"""

import os
import uvicorn


def main():
    uvicorn.run(
        "portfolio.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        reload=False,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    main()

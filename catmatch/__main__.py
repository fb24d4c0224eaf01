"""개발 서버 실행: python -m catmatch"""
import os

import uvicorn

from catmatch.core.config import settings


def main() -> None:
    uvicorn.run(
        "catmatch.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from bechdel import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)

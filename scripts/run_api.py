import os

import uvicorn


def main() -> None:
    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "5000"))
    uvicorn.run("devcamper.main:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()

from typing import Any, Optional, Protocol, Tuple


class BrowserEngine(Protocol):
    """What the session needs from a browser automation driver.

    ``launch`` returns a browser exposing ``new_context(viewport=, user_agent=)``
    and ``close()``; contexts expose ``new_page()`` and ``close()``.
    """

    async def launch(self, browser: str = "chromium", headless: bool = False) -> Any:
        ...

    async def stop(self) -> None:
        ...


Viewport = Tuple[int, int]


def viewport_dict(viewport: Optional[Viewport]) -> Optional[dict]:
    if viewport is None:
        return None
    width, height = viewport
    return {"width": width, "height": height}

"""
Stdio host for sfbrowser.

Protocol: newline-free JSON messages with 4-byte little-endian length prefix.
Messages:
  {"type":"ping"}
  {"type":"list_tools"}
  {"type":"call", "tool":"sf_navigate_home", "args":{...}}

Responses:
  {"ok": true, "result": ...} or {"ok": false, "error": "..."}

Requests are handled one at a time, in arrival order. The browser session is
closed on end of input, SIGINT/SIGTERM or any fatal error.
"""
from __future__ import annotations

import asyncio
import json
import logging
import signal
import struct
import sys
import threading
from typing import Any, BinaryIO, Dict, Optional

from ..automation.playwright_engine import PlaywrightEngine
from ..automation.session import SessionManager
from ..core.config import ServerConfig
from ..core.org_manager import OrgManager
from ..integrations import get_source
from ..tools import Toolbox

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<I")


def read_msg(stream: BinaryIO) -> Optional[Dict[str, Any]]:
    raw_len = stream.read(HEADER.size)
    if len(raw_len) < HEADER.size:
        return None
    msg_len = HEADER.unpack(raw_len)[0]
    data = stream.read(msg_len)
    if len(data) < msg_len:
        return None
    msg = json.loads(data.decode("utf-8"))
    # None is reserved for end of input, so a `null` body is rejected here
    if not isinstance(msg, dict):
        raise ValueError(f"expected a JSON object, got {type(msg).__name__}")
    return msg


def write_msg(stream: BinaryIO, obj: Dict[str, Any]) -> None:
    data = json.dumps(obj, default=str, separators=(",", ":")).encode("utf-8")
    stream.write(HEADER.pack(len(data)))
    stream.write(data)
    stream.flush()


async def handle(toolbox: Toolbox, msg: Dict[str, Any]) -> Dict[str, Any]:
    mtype = msg.get("type")
    if mtype == "ping":
        return {"ok": True, "result": "pong"}
    if mtype == "list_tools":
        return {"ok": True, "result": toolbox.describe()}
    if mtype == "call":
        name = msg.get("tool")
        if not name:
            return {"ok": False, "error": "missing_tool"}
        args = msg.get("args") or {}
        if not isinstance(args, dict):
            return {"ok": False, "error": "invalid_args"}
        result = await toolbox.call(name, args)
        return {"ok": True, "result": result.to_dict()}
    return {"ok": False, "error": f"unknown_type:{mtype}"}


def start_reader(stream: BinaryIO) -> asyncio.Queue:
    """Read frames on a daemon thread so a blocked stdin never holds up shutdown.

    The queue yields decoded messages, ``ValueError`` instances for frames that
    fail to decode, and a final ``None`` at end of input.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def pump() -> None:
        while True:
            try:
                msg = read_msg(stream)
            except ValueError as e:
                # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
                loop.call_soon_threadsafe(queue.put_nowait, e)
                continue
            except (OSError, RuntimeError):
                msg = None
            try:
                loop.call_soon_threadsafe(queue.put_nowait, msg)
            except RuntimeError:
                return
            if msg is None:
                return

    threading.Thread(target=pump, name="sfbrowser-stdin", daemon=True).start()
    return queue


async def serve_streams(toolbox: Toolbox, stdin: BinaryIO, stdout: BinaryIO) -> None:
    messages = start_reader(stdin)
    try:
        while True:
            msg = await messages.get()
            if isinstance(msg, ValueError):
                write_msg(stdout, {"ok": False, "error": f"bad_message:{msg}"})
                continue
            if msg is None:
                logger.info("Input closed, shutting down")
                break
            try:
                reply = await handle(toolbox, msg)
            except Exception as e:
                logger.exception("Request failed")
                reply = {"ok": False, "error": f"exception:{e}"}
            write_msg(stdout, reply)
    finally:
        await toolbox.session.close_session()


def build_toolbox(config: Optional[ServerConfig] = None) -> Toolbox:
    config = config or ServerConfig.from_env()
    source = get_source("sf", sf_path=config.sf_cli_path)
    org_manager = OrgManager(source, ttl_s=config.credential_ttl_s)
    return Toolbox(SessionManager(org_manager, PlaywrightEngine(), config))


async def serve(config: Optional[ServerConfig] = None) -> None:
    toolbox = build_toolbox(config)
    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass
    try:
        await serve_streams(toolbox, sys.stdin.buffer, sys.stdout.buffer)
    except asyncio.CancelledError:
        logger.info("Interrupted, session closed")


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()

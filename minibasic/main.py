import asyncio
import logging
import os
from enum import Enum
from typing import List, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .ast_nodes import Input, Program
from .config import Settings
from .errors import BasicError, BasicSyntaxError
from .interpreter import BufferedIO, Interpreter
from .lexer import tokenize
from .parser import parse

logger = logging.getLogger(__name__)

settings = Settings.from_env()

app = FastAPI(title="MiniBASIC IDE", version="1.0.0")

STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")

# Queued to release a pending input wait when a session is stopped
STOP = object()

EXAMPLES = {
    "hello": {"name": "Hello", "code": 'print "Hello, world"\nexit\n'},
    "countdown": {
        "name": "Countdown",
        "code": (
            "n = 5\n"
            "print n\n"
            "loop:\n"
            "n = n - 1\n"
            "print n\n"
            "if n > 0 then loop\n"
            'print "liftoff"\n'
        ),
    },
    "greeting": {
        "name": "Greeting (input)",
        "code": (
            'print "What is your name?"\n'
            "input name\n"
            'print "Hello, " + name\n'
        ),
    },
}

# --- Data models ---

class CodeRequest(BaseModel):
    code: str

class RunRequest(BaseModel):
    code: str
    inputs: List[str] = []

class RunResponse(BaseModel):
    success: bool
    output: List[str]
    error: Optional[str] = None

# --- Helpers ---

def ast_to_dict(node):
    if isinstance(node, Enum):
        return node.value
    if isinstance(node, (int, str, float, bool)) or node is None:
        return node
    if isinstance(node, list):
        return [ast_to_dict(v) for v in node]
    if isinstance(node, dict):
        return {str(k): ast_to_dict(v) for k, v in node.items()}
    result = {"type": type(node).__name__}
    for key, value in vars(node).items():
        result[key] = ast_to_dict(value)
    return result

def format_error(error):
    return f"{type(error).__name__}: {error}"

class WebInterpreter(Interpreter):
    """
    Interpreter driven step by step from a WebSocket session. Output is
    streamed after every statement; ``input`` statements wait for the client.
    """
    def __init__(self, program: Program, websocket: WebSocket, config: Settings):
        super().__init__(
            program, BufferedIO(),
            max_steps=config.max_steps, strict_labels=config.strict_labels,
        )
        self.websocket = websocket
        self.config = config
        self.input_queue = asyncio.Queue()
        self.waiting_for_input = False
        self.should_stop = False
        self.disconnected = False
        self.sent = 0

    async def run_async(self):
        try:
            while not self.should_stop:
                if isinstance(self.current_statement, Input):
                    await self._handle_input_async(self.current_statement)
                    if self.should_stop:
                        break
                if not self.step():
                    break
                await self._flush_output()
                await asyncio.sleep(self.config.step_delay)
        finally:
            await self._flush_output()

    async def _handle_input_async(self, stmt):
        self.waiting_for_input = True
        await self.websocket.send_json({"type": "input_request", "message": "? ", "variable": stmt.var})
        try:
            value = await asyncio.wait_for(self.input_queue.get(), timeout=self.config.input_timeout)
            if value is not STOP:
                self.io.inputs.append(str(value))
        finally:
            self.waiting_for_input = False

    async def _flush_output(self):
        if self.disconnected:
            return
        for line in self.io.output[self.sent:]:
            await self.websocket.send_json({"type": "output", "data": line})
        self.sent = len(self.io.output)

    async def provide_input(self, value):
        if self.waiting_for_input:
            await self.input_queue.put(value)

    def stop(self, disconnected=False):
        self.should_stop = True
        self.disconnected = self.disconnected or disconnected
        # Wakes an input wait so the run ends without waiting for the timeout
        self.input_queue.put_nowait(STOP)

async def handle_execution(websocket: WebSocket, code: str):
    interpreter = None

    async def message_handler():
        try:
            while True:
                data = await websocket.receive_json()
                if data.get("type") == "input":
                    if interpreter:
                        await interpreter.provide_input(data.get("value", ""))
                elif data.get("type") == "stop":
                    if interpreter:
                        interpreter.stop()
                    break
        except WebSocketDisconnect:
            if interpreter:
                interpreter.stop(disconnected=True)

    message_task = None
    try:
        program = parse(tokenize(code))
        interpreter = WebInterpreter(program, websocket, settings)
        await websocket.send_json({"type": "execution_started"})
        message_task = asyncio.create_task(message_handler())
        await interpreter.run_async()
        if interpreter.disconnected:
            return
        await websocket.send_json({"type": "execution_finished", "success": True})
    except (BasicError, asyncio.TimeoutError) as e:
        logger.info("Interactive run failed: %s", e)
        await websocket.send_json({"type": "execution_finished", "success": False, "error": format_error(e)})
    finally:
        if message_task:
            message_task.cancel()
            await asyncio.gather(message_task, return_exceptions=True)

# --- API endpoints ---

@app.websocket("/api/execute-interactive")
async def execute_interactive(websocket: WebSocket):
    await websocket.accept()
    try:
        code = (await websocket.receive_json()).get("code", "")
        await handle_execution(websocket, code)
    except WebSocketDisconnect:
        pass

@app.post("/api/run", response_model=RunResponse)
def run_code(request: RunRequest):
    io = BufferedIO(request.inputs)
    try:
        program = parse(tokenize(request.code))
        Interpreter(program, io, max_steps=settings.max_steps, strict_labels=settings.strict_labels).run()
    except BasicError as e:
        return RunResponse(success=False, output=io.output, error=format_error(e))
    return RunResponse(success=True, output=io.output)

@app.post("/api/compile")
def compile_code(request: CodeRequest):
    tokens = tokenize(request.code)
    token_list = [{"type": t.type.name, "value": t.lexeme, "line": t.line, "column": t.column} for t in tokens]
    try:
        program = parse(tokens)
        ast = ast_to_dict(program)
    except BasicSyntaxError as e:
        return {"success": False, "tokens": token_list, "errors": [str(e)]}
    except RecursionError:
        return {"success": False, "tokens": token_list, "errors": ["Expression too deeply nested"]}
    return {"success": True, "tokens": token_list, "ast": ast}

@app.get("/api/examples")
def get_examples():
    return EXAMPLES

# --- App configuration ---

if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

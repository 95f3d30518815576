# waitmap/endpoints/ws_reports.py
import asyncio
import json
import logging
from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger("report_feed_ws")


class ReportFeed:
    """Pushes report-insert notifications to connected clients.

    Clients react to each event by refreshing; the feed never aggregates.
    """

    def __init__(self):
        self.clients = set()

    async def publish(self, event: dict):
        message = json.dumps(event)
        logger.info(f"📡 Broadcasting {event.get('event')} for hospital {event.get('hospital_id')} to {len(self.clients)} clients.")
        for ws in list(self.clients):
            try:
                await ws.send_text(message)
            except Exception as e:
                self.clients.discard(ws)
                logger.warning(f"⚠️ Removed client {id(ws)} due to error: {e}")

    async def connect(self, websocket: WebSocket):
        self.clients.add(websocket)
        await websocket.accept()
        logger.info(f"✅ Client {id(websocket)} connected. Total: {len(self.clients)}")

    def disconnect(self, websocket: WebSocket):
        self.clients.discard(websocket)
        logger.info(f"🔌 Client {id(websocket)} disconnected. Total: {len(self.clients)}")


report_feed = ReportFeed()


def get_report_feed() -> ReportFeed:
    return report_feed


def insert_event(report: dict, aggregated_wait: dict) -> dict:
    return {
        "event": "INSERT",
        "table": "reports",
        "hospital_id": report["hospital_id"],
        "report": report,
        "aggregated_wait": aggregated_wait,
    }


async def ws_reports(websocket: WebSocket):
    """Handle WebSocket connections for the report change feed."""
    await report_feed.connect(websocket)
    try:
        while True:
            # inbound messages are ignored; receiving keeps disconnects visible
            await websocket.receive_text()
    except WebSocketDisconnect:
        report_feed.disconnect(websocket)
    except asyncio.CancelledError:
        report_feed.disconnect(websocket)
        raise

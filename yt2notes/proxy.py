"""Transcript proxy server.

Wraps the caption extractor in a small CORS-enabled JSON API so browser
clients (and the backend-proxy transcript strategy) can fetch captions
without hitting YouTube directly.

Run with ``python -m yt2notes.proxy`` or the ``yt2notes-proxy`` script.
"""

from datetime import datetime, timezone

from flask import Flask, jsonify, request
from loguru import logger

from yt2notes.captions import fetch_captions
from yt2notes.config import Config

SOURCE_LABEL = "Backend Proxy"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# (reason, substrings, status, user-facing message), checked in order
ERROR_RULES = [
    ("disabled", ("disabled",), 404, "Transcript is disabled for this video"),
    ("not_found", ("no transcript found",), 404, "No transcript available for this video"),
    ("unavailable", ("video unavailable", "private video"), 404, "Video is unavailable or private"),
    ("empty", (), 404, "No transcript found for this video"),
]


def classify_error(error: Exception) -> tuple[int, str]:
    """Map an extractor failure to (status code, error message)."""
    reason = getattr(error, "reason", None)
    for rule_reason, _, status, message in ERROR_RULES:
        if reason == rule_reason:
            return status, message

    # No structured reason: fall back to matching the message text
    text = str(error).lower()
    for _, substrings, status, message in ERROR_RULES:
        if any(s in text for s in substrings):
            return status, message
    return 500, "Failed to fetch transcript"


def create_app(extractor=None) -> Flask:
    """
    Build the proxy application.

    Args:
        extractor: Callable taking a video ID and returning a CaptionTrack.
            Defaults to fetch_captions.
    """
    extractor = extractor or fetch_captions
    app = Flask(__name__)

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.before_request
    def short_circuit_preflight():
        if request.url_rule is None:
            return None
        if request.method == "OPTIONS":
            return "", 200
        # Flask adds HEAD to GET routes; only GET is served
        if request.method == "HEAD":
            return method_not_allowed(None)
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    @app.route("/api/youtube-transcript", methods=["GET"])
    @app.route("/api/youtube-transcript/<video_id>", methods=["GET"])
    def youtube_transcript(video_id=None):
        video_id = (video_id or request.args.get("videoId") or "").strip()
        if not video_id:
            return jsonify({"error": "Video ID is required"}), 400

        logger.info("Fetching transcript for video: {}", video_id)
        try:
            track = extractor(video_id)
        except Exception as e:
            logger.error("Error fetching transcript for {}: {}", video_id, e)
            status, message = classify_error(e)
            return jsonify({"error": message, "videoId": video_id, "details": str(e)}), status

        if not track.items:
            return jsonify({"error": "No transcript found for this video", "videoId": video_id}), 404

        # Extractor times are milliseconds; clients expect seconds
        segments = [
            {
                "text": item["text"],
                "start": item["offset"] / 1000,
                "duration": item["duration"] / 1000,
            }
            for item in track.items
        ]
        return jsonify({
            "success": True,
            "transcript": " ".join(segment["text"] for segment in segments),
            "segments": segments,
            "title": track.title or f"YouTube Video {video_id}",
            "videoId": video_id,
            "source": SOURCE_LABEL,
        })

    return app


def main():
    port = Config.PORT
    logger.info("YouTube Transcript Proxy Server running on port {}", port)
    logger.info("Health check: http://localhost:{}/health", port)
    logger.info("API endpoint: http://localhost:{}/api/youtube-transcript/{{videoId}}", port)
    create_app().run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()

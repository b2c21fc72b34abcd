"""Service status endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from shopping_agent.config import settings

router = APIRouter(prefix="/api", tags=["status"])

FEATURES = [
    "Universal Shopping - ALL Platforms (Amazon, Flipkart, Meesho, Myntra, Ajio, Croma)",
    f"Smart Fallback - Tries multiple sources until {settings.universal_product_threshold}+ products found",
    f"YouTube Video Viewing ({settings.youtube_video_count} Embeds)",
    "Real Product Images & Prices",
    "Multi-Platform Aggregation",
    "Product URLs - Click to redirect",
    "Food Ordering (Swiggy/Zomato)",
    "Ride Booking (Uber/Ola)",
    "Web Browsing",
    "Screenshots",
    "AI Chat",
    "Session Management",
    "Auto CAPTCHA/Login Detection",
]


@router.get("/test")
async def status():
    """Report that the service is up and whether the model API key is set."""
    return {
        "success": True,
        "message": "Shopping Agent - Universal Shopping Intelligence! 🚀",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "apiConfigured": settings.llm_configured,
        "features": FEATURES,
    }

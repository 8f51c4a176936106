"""Sample feedback rows for local runs of the service."""
import asyncio
import logging
from datetime import timedelta

from database import FeedbackStore, init_db
from models import utc_now

logger = logging.getLogger(__name__)

# (source, text, days ago)
SAMPLE_FEEDBACK = [
    ("GitHub", "The API response time is extremely slow, taking over 5 seconds to load. This is blocking our production deployment.", 5),
    ("GitHub", "Love the new dashboard UI! The dark mode looks fantastic and the navigation is much more intuitive.", 4),
    ("GitHub", "Documentation is missing examples for the authentication flow. Spent 3 hours trying to figure it out.", 4),
    ("GitHub", "Feature request: Add support for bulk operations. Would save us tons of time with large datasets.", 3),
    ("GitHub", "Critical bug: Users are getting 500 errors when trying to upload files larger than 10MB.", 3),
    ("Discord", "hey anyone else experiencing crashes on the mobile app? happens every time i try to export data", 5),
    ("Discord", "The customer support team is amazing! Got my issue resolved in under 10 minutes.", 4),
    ("Discord", "pricing seems really high compared to competitors. any student discounts available?", 3),
    ("Discord", "This platform has completely transformed our workflow. Best decision we made this year!", 2),
    ("Discord", "Search functionality is broken - keeps returning irrelevant results", 2),
    ("Twitter", "Been using @product for 2 weeks now. The performance improvements in v2.0 are incredible! 🚀", 5),
    ("Twitter", "@product your app keeps logging me out every 5 minutes. super frustrating when trying to work", 4),
    ("Twitter", "Why is there no way to export data to CSV? This should be a basic feature @product", 3),
    ("Twitter", "Shoutout to @product for having the cleanest API documentation I've ever used. Seriously top-notch.", 2),
    ("Twitter", "@product URGENT: Payment processing is down. Cannot complete transactions. Need fix ASAP!", 1),
    ("Support Ticket", "I cannot access my account after the recent update. Keep getting \"Invalid credentials\" error even though my password is correct.", 5),
    ("Support Ticket", "The integration with Salesforce is not syncing properly. Data from last week is still missing.", 4),
    ("Support Ticket", "Excellent service! Your team helped migrate all our data smoothly. Very impressed with the onboarding process.", 3),
    ("Support Ticket", "Webhook notifications are not being delivered. Checked our endpoint and it's working fine on our side.", 2),
    ("Support Ticket", "Security concern: Found that API keys are visible in browser console. This needs to be fixed immediately.", 1),
    ("Email", "We are a team of 50 and would like to upgrade to enterprise plan. What are the pricing options and custom features available?", 5),
    ("Email", "The recent UI redesign is terrible. Everything takes more clicks now and features are harder to find. Please bring back the old interface.", 4),
    ("Email", "Suggestion: Add keyboard shortcuts for common actions. Would make power users much more productive.", 3),
    ("Email", "Your platform has reduced our operational costs by 40%. Thank you for building such an amazing product!", 2),
    ("Email", "Accessibility issue: Screen reader support is very poor. Many buttons and forms are not properly labeled.", 1),
    ("Forum", "Tutorial: Here is how I set up automated backups using the API. Hope this helps others!", 4),
    ("Forum", "Is there a way to customize the email templates? Can't find this option in settings.", 3),
    ("Forum", "Warning: Don't upgrade to v2.1 yet. It breaks compatibility with legacy integrations.", 2),
    ("Forum", "Rate limiting is too aggressive. Getting blocked after just 100 API calls per minute.", 1),
    ("Forum", "This community is so helpful! Got answers to all my questions within hours. Loving the product and the support.", 1),
]


async def seed_feedback(store: FeedbackStore) -> int:
    """Insert every sample row unanalyzed, dated relative to now.

    Returns:
        Number of rows inserted
    """
    now = utc_now()
    for source, text, days_ago in SAMPLE_FEEDBACK:
        await store.insert(source, text, created_at=now - timedelta(days=days_ago))
    logger.info(f"Seeded {len(SAMPLE_FEEDBACK)} feedback entries")
    return len(SAMPLE_FEEDBACK)


async def main():
    """Create tables and load the sample rows into the configured database."""
    logging.basicConfig(level=logging.INFO)
    await init_db()
    await seed_feedback(FeedbackStore())


if __name__ == "__main__":
    asyncio.run(main())

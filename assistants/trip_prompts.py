"""Prompt builders for the trip planner skills.

Every builder is pure: the same inputs always give the same prompt. Unset
optional fields are replaced with a readable placeholder.
"""

import re
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from assistants.budget import BudgetBreakdown


NOT_SPECIFIED = "Not specified"


def display(value: Any, placeholder: str = NOT_SPECIFIED) -> str:
    """Render a field value, or ``placeholder`` when it is unset or empty."""
    if value is None:
        return placeholder
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value if str(item).strip()]
        return ", ".join(items) if items else placeholder
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or placeholder


def _compose(
    header: Sequence[str],
    heading: str,
    sections: Sequence[str],
    closing: Iterable[str] = (),
) -> str:
    lines: List[str] = list(header)
    lines.append("")
    lines.append(heading)
    lines.extend(f"{number}. {section}" for number, section in enumerate(sections, start = 1))
    closing = list(closing)
    if closing:
        lines.append("")
        lines.extend(closing)
    return "\n".join(lines)


def destination_research_prompt(destination: str, travel_dates: Optional[str] = None, interests: Any = None) -> str:
    return _compose(
        header = [
            f"Provide comprehensive destination research for: {display(destination)}",
            f"Travel dates: {display(travel_dates)}",
            f"Traveler interests: {display(interests)}",
        ],
        heading = "Include detailed information about:",
        sections = [
            "Overview and highlights",
            "Best time to visit and weather considerations",
            "Top attractions and must-see places",
            "Cultural considerations and local customs",
            "Transportation options within the destination",
            "Safety information and travel advisories",
            "Visa requirements and entry information",
            "Local cuisine highlights",
            "Shopping and entertainment districts",
            "Estimated daily budget ranges for different travel styles",
        ],
        closing = ["Format as a structured, comprehensive destination guide."],
    )


def flight_search_prompt(
    origin: str,
    destination: str,
    departure_date: str,
    return_date: Optional[str] = None,
    passengers: Any = None,
) -> str:
    return _compose(
        header = [
            f"Analyze flight options from {display(origin)} to {display(destination)}:",
            f"Departure: {display(departure_date)}",
            f"Return: {display(return_date, 'One-way')}",
            f"Passengers: {display(passengers, '1')}",
        ],
        heading = "Provide comprehensive flight information:",
        sections = [
            "Available flight options with approximate pricing ranges",
            "Recommended airlines and typical routes",
            "Flight duration and connection considerations",
            "Best booking strategies and optimal timing",
            "Airport information and transportation to/from airports",
            "Baggage policies and restrictions",
            "Travel time considerations and jet lag tips",
            "Alternative airport options to consider",
            "Peak vs off-peak pricing patterns",
            "Tips for finding deals and using points/miles",
        ],
        closing = [
            "Note: Recommend using flight comparison sites like Kayak, Google Flights, "
            "or Expedia for real-time pricing.",
        ],
    )


def accommodation_search_prompt(
    destination: str,
    check_in: str,
    check_out: str,
    guests: Any = None,
    budget: Any = None,
) -> str:
    return _compose(
        header = [
            "Find accommodation recommendations for:",
            f"Location: {display(destination)}",
            f"Check-in: {display(check_in)}",
            f"Check-out: {display(check_out)}",
            f"Guests: {display(guests, '1')}",
            f"Budget: {display(budget, 'Flexible')}",
        ],
        heading = "Provide comprehensive lodging information:",
        sections = [
            "Hotel categories and price ranges (budget/mid-range/luxury)",
            "Recommended neighborhoods and areas to stay",
            "Top-rated accommodations by category",
            "Alternative lodging options (Airbnb, hostels, boutique hotels)",
            "Booking platforms and strategies for best deals",
            "Amenities and features to prioritize",
            "Location considerations (proximity to attractions/transport)",
            "Safety and security considerations",
            "Cancellation policies and booking flexibility",
            "Seasonal pricing variations and booking timing",
        ],
        closing = [
            "Note: Recommend using Booking.com, Airbnb, Hotels.com for real-time "
            "availability and pricing.",
        ],
    )


def activity_planning_prompt(destination: str, dates: str, interests: Any = None, group_size: Any = None) -> str:
    return _compose(
        header = [
            "Plan comprehensive activities and experiences for:",
            f"Destination: {display(destination)}",
            f"Dates: {display(dates)}",
            f"Interests: {display(interests, 'General sightseeing')}",
            f"Group Size: {display(group_size, '1')}",
        ],
        heading = "Create detailed activity recommendations:",
        sections = [
            "Top attractions and must-do activities with timing",
            "Restaurant recommendations by cuisine and budget level",
            "Cultural experiences and local events during travel dates",
            "Outdoor activities, tours, and adventure options",
            "Entertainment and nightlife recommendations",
            "Family-friendly activities if applicable",
            "Hidden gems and local favorites",
            "Seasonal activities and weather considerations",
            "Advance booking requirements and ticket information",
            "Estimated costs and duration for each activity",
            "Alternative indoor options for bad weather",
            "Photography spots and Instagram-worthy locations",
        ],
        closing = ["Organize by priority and group activities by location/area for efficient planning."],
    )


def itinerary_prompt(destination: str, travel_dates: str, gathered_info: str, preferences: Any = None) -> str:
    return _compose(
        header = [
            "Create a comprehensive day-by-day itinerary using all gathered information:",
            "",
            f"Destination: {display(destination)}",
            f"Travel Dates: {display(travel_dates)}",
            f"Preferences: {display(preferences, 'No specific preferences')}",
            "",
            "All Gathered Information:",
            display(gathered_info),
        ],
        heading = "Structure the itinerary with:",
        sections = [
            "Daily schedule with realistic time blocks and transitions",
            "Morning, afternoon, and evening activities",
            "Restaurant recommendations for each meal",
            "Transportation details between locations",
            "Practical tips and important reminders",
            "Backup options for weather or closures",
            "Cost estimates for each day's activities",
            "Contact information and addresses",
            "Suggested packing items for specific activities",
            "Cultural etiquette reminders for specific activities",
        ],
        closing = [
            "Ensure logical flow, realistic timing, and account for travel time between locations.",
            "Format as a clear, day-by-day guide that can be easily followed.",
        ],
    )


def budget_report_prompt(trip_details: str, breakdown: BudgetBreakdown) -> str:
    days = breakdown.duration_days
    people = breakdown.group_size
    tier_lines = []
    for label, tier in [
        ("Budget Option", breakdown.budget),
        ("Mid-Range Option", breakdown.mid_range),
        ("Luxury Option", breakdown.luxury),
    ]:
        tier_lines.append(
            f"- {label}: ${_money(tier.total)} (${tier.per_person_per_day(days, people)}/person/day)"
        )

    return _compose(
        header = [
            "Create a comprehensive budget breakdown report:",
            "",
            f"Trip Details: {display(trip_details)}",
            f"Duration: {days} days",
            f"Group Size: {people} people",
            "",
            "Calculated Totals:",
            *tier_lines,
        ],
        heading = "Provide detailed analysis including:",
        sections = [
            "Cost breakdown by category (accommodation, meals, activities, transport, misc)",
            "Daily spending estimates for each budget tier",
            "Money-saving tips and strategies",
            "Payment methods and currency considerations",
            "Contingency fund recommendations (suggest 15-20% buffer)",
            "Cost comparison between budget tiers",
            "Tips for tracking expenses during travel",
            "Seasonal pricing considerations",
            "Group discounts and savings opportunities",
            "Emergency fund recommendations",
        ],
        closing = ["Format as a clear, actionable budget guide with specific dollar amounts."],
    )


def context_management_prompt(action: str, update_info: str, context_data: Any = None) -> str:
    return _compose(
        header = [
            "Manage the shared context for this trip planning session:",
            "",
            f"Action: {display(action)}",
            f"Current Context: {_context_text(context_data)}",
            f"New Information: {display(update_info)}",
        ],
        heading = "Provide comprehensive context management:",
        sections = [
            "Updated consolidated context summary",
            "List of completed planning phases",
            "Remaining tasks and next steps",
            "Key decisions that still need to be made",
            "Information gaps that need to be filled",
            "Recommendations for optimizing the planning process",
            "Priority actions for the user",
            "Status of each planning component (destination, flights, hotels, activities, itinerary, budget)",
            "Important deadlines or time-sensitive tasks",
            "Overall trip planning progress percentage",
        ],
        closing = ["Maintain awareness of all gathered information and provide strategic guidance."],
    )


def destination_record(destination: str, travel_dates: Any, interests: Any, research: str, now: datetime) -> str:
    """Text stored in the destinations vector store."""
    return _record([
        ("Destination", display(destination)),
        ("Research Date", now.isoformat()),
        ("Travel Dates", display(travel_dates)),
        ("Interests", display(interests, "General")),
        ("Research", research),
    ])


def itinerary_record(trip_id: str, destination: str, travel_dates: str, preferences: Any, itinerary: str, now: datetime) -> str:
    """Text stored in the travel plans vector store."""
    return _record([
        ("Trip ID", trip_id),
        ("Destination", display(destination)),
        ("Dates", display(travel_dates)),
        ("Preferences", display(preferences, "No specific preferences")),
        ("Created", now.isoformat()),
        ("Itinerary", itinerary),
    ])


def context_record(action: str, update_info: str, summary: str, now: datetime) -> str:
    """Text stored in the trip context vector store."""
    return _record([
        ("Context Update", now.isoformat()),
        ("Action", display(action)),
        ("Update", display(update_info)),
        ("Summary", summary),
    ])


def doc_id(prefix: str, now: datetime, destination: Optional[str] = None) -> str:
    """Build ids like ``dest_New_York_1718000000000``."""
    millis = int(now.timestamp() * 1000)
    if destination is None:
        return f"{prefix}_{millis}"
    slug = re.sub(r"\s+", "_", str(destination).strip())
    return f"{prefix}_{slug}_{millis}"


def _record(pairs: Sequence[Tuple[str, str]]) -> str:
    return "\n".join(f"{label}: {value}" for label, value in pairs)


def _context_text(context_data: Any) -> str:
    if isinstance(context_data, dict):
        if not context_data:
            return "New session"
        return "; ".join(f"{key}: {display(value)}" for key, value in context_data.items())
    return display(context_data, "New session")


def _money(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"

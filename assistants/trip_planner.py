"""Trip Planner: one orchestrator agent whose skills act as specialist planners.

Seven skills each run a templated prompt through the LLM (destination
research, flights, accommodation, activities, itinerary, budget, context);
two more search what earlier skills stored in the vector stores.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from agent_kit.agent import Agent, AgentBuilder
from agent_kit.ports import LLMInvoker, VectorStore
from assistants import trip_prompts
from assistants.budget import DEFAULT_RATES, RateTable, compute_budget
from assistants.catalog import Collaborators, load_behavior


logger = logging.getLogger("Trip-Planner")

TRIP_CONTEXT_NAMESPACE = "trip_context"
DESTINATIONS_NAMESPACE = "destinations"
TRAVEL_PLANS_NAMESPACE = "travel_plans"


class TripPlannerSkills:
    """Skill bodies for the trip planner."""

    def __init__(
        self,
        llm: LLMInvoker,
        destinations: VectorStore,
        travel_plans: VectorStore,
        trip_context: VectorStore,
        rates: RateTable = DEFAULT_RATES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.llm = llm
        self.destinations = destinations
        self.travel_plans = travel_plans
        self.trip_context = trip_context
        self.rates = rates
        self.clock = clock

    async def destination_research(self, destination: str, travel_dates: Optional[str] = None, interests: Any = None) -> Dict[str, Any]:
        prompt = trip_prompts.destination_research_prompt(destination, travel_dates, interests)
        destination_info = await self.llm.invoke(prompt)

        now = self.clock()
        await self.destinations.insert_doc(
            trip_prompts.doc_id("dest", now, destination),
            trip_prompts.destination_record(destination, travel_dates, interests, destination_info, now),
        )

        return {
            "destination_info": destination_info,
            "context_update": (
                f"Destination research completed for {destination}. Key info gathered: "
                "attractions, weather, culture, transportation, safety."
            ),
            "next_steps": "Consider searching for flights and accommodations based on travel dates.",
        }

    async def flight_search(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: Optional[str] = None,
        passengers: Any = None,
    ) -> Dict[str, Any]:
        prompt = trip_prompts.flight_search_prompt(origin, destination, departure_date, return_date, passengers)
        flight_info = await self.llm.invoke(prompt)

        return {
            "flight_info": flight_info,
            "context_update": (
                f"Flight search completed: {origin} to {destination}, {departure_date} - "
                f"{trip_prompts.display(return_date, 'one-way')}, "
                f"{trip_prompts.display(passengers, '1')} passengers."
            ),
            "next_steps": "Search for accommodations at the destination.",
        }

    async def accommodation_search(
        self,
        destination: str,
        check_in: str,
        check_out: str,
        guests: Any = None,
        budget: Any = None,
    ) -> Dict[str, Any]:
        prompt = trip_prompts.accommodation_search_prompt(destination, check_in, check_out, guests, budget)
        accommodation_info = await self.llm.invoke(prompt)

        return {
            "accommodation_info": accommodation_info,
            "context_update": (
                f"Accommodation search completed for {destination}: {check_in} to {check_out}, "
                f"{trip_prompts.display(guests, '1')} guests, "
                f"budget: {trip_prompts.display(budget, 'flexible')}."
            ),
            "next_steps": "Plan activities and experiences for the destination.",
        }

    async def activity_planning(self, destination: str, dates: str, interests: Any = None, group_size: Any = None) -> Dict[str, Any]:
        prompt = trip_prompts.activity_planning_prompt(destination, dates, interests, group_size)
        activity_info = await self.llm.invoke(prompt)

        return {
            "activity_info": activity_info,
            "context_update": (
                f"Activity planning completed for {destination}: {dates}, "
                f"interests: {trip_prompts.display(interests, 'general sightseeing')}, "
                f"group size: {trip_prompts.display(group_size, '1')}."
            ),
            "next_steps": "Build a comprehensive day-by-day itinerary using all gathered information.",
        }

    async def itinerary_builder(self, destination: str, travel_dates: str, gathered_info: str, preferences: Any = None) -> Dict[str, Any]:
        prompt = trip_prompts.itinerary_prompt(destination, travel_dates, gathered_info, preferences)
        itinerary = await self.llm.invoke(prompt)

        now = self.clock()
        trip_id = trip_prompts.doc_id("itinerary", now, destination)
        await self.travel_plans.insert_doc(
            trip_id,
            trip_prompts.itinerary_record(trip_id, destination, travel_dates, preferences, itinerary, now),
        )

        return {
            "itinerary": itinerary,
            "trip_id": trip_id,
            "context_update": (
                f"Complete itinerary created and saved for {destination} trip ({travel_dates}). Trip ID: {trip_id}"
            ),
            "next_steps": "Calculate detailed budget breakdown for the planned trip.",
        }

    async def budget_calculator(self, trip_details: str, duration: Any, group_size: Any) -> Dict[str, Any]:
        breakdown = compute_budget(duration, group_size, self.rates)
        budget_report = await self.llm.invoke(trip_prompts.budget_report_prompt(trip_details, breakdown))

        totals = breakdown.as_dict()
        return {
            "budget_report": budget_report,
            "budget_totals": totals,
            "context_update": (
                f"Budget calculated: Budget (${totals['budget']}), Mid-range (${totals['mid_range']}), "
                f"Luxury (${totals['luxury']}) for {breakdown.group_size} people, {breakdown.duration_days} days."
            ),
            "next_steps": "All major planning phases completed. Review and finalize trip details.",
        }

    async def context_manager(self, action: str, update_info: str, context_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        prompt = trip_prompts.context_management_prompt(action, update_info, context_data)
        context_summary = await self.llm.invoke(prompt)

        now = self.clock()
        context_id = trip_prompts.doc_id("context", now)
        await self.trip_context.insert_doc(
            context_id,
            trip_prompts.context_record(action, update_info, context_summary, now),
        )

        return {
            "context_summary": context_summary,
            "planning_status": f"Context updated with action: {action}",
            "context_id": context_id,
        }

    async def search_travel_plans(self, query: str) -> Union[Dict[str, Any], str]:
        hits = await self.travel_plans.search(query, top_k = 5)
        if not hits:
            return f"No matching travel plans found for: \"{query}\""
        return {
            "message": f"Found {len(hits)} matching travel plans:",
            "plans": [hit.as_dict() for hit in hits],
        }

    async def get_destination_insights(self, destination: str) -> Union[Dict[str, Any], str]:
        hits = await self.destinations.search(destination, top_k = 3)
        if not hits:
            return f"No previous research found for: \"{destination}\""
        return {
            "message": f"Found destination insights for {destination}:",
            "insights": [hit.as_dict() for hit in hits],
        }


def build_trip_planner(collaborators: Collaborators, clock: Callable[[], datetime] = datetime.now) -> Agent:
    skills = TripPlannerSkills(
        llm = collaborators.llm,
        destinations = collaborators.vector_store(DESTINATIONS_NAMESPACE),
        travel_plans = collaborators.vector_store(TRAVEL_PLANS_NAMESPACE),
        trip_context = collaborators.vector_store(TRIP_CONTEXT_NAMESPACE),
        clock = clock,
    )

    builder = AgentBuilder(
        id = "multi-agent-trip-planner",
        name = "Multi-Agent Trip Planner",
        behavior = load_behavior("trip_planner"),
        model = collaborators.model,
        llm_client = collaborators.llm_client,
    )

    builder.add_skill(
        name = "destination_research",
        description = (
            "Research destinations, attractions, weather, best times to visit, and general travel "
            "information for a specified location"
        ),
        process = skills.destination_research,
        inputs = {
            "destination": {"type": "Text", "description": "The destination to research (city, country, or region)"},
            "travel_dates": {
                "type": "Text",
                "description": "Planned travel dates (e.g., \"2024-03-15 to 2024-03-22\")",
                "optional": True,
            },
            "interests": {
                "type": "Array",
                "description": "Traveler interests (e.g., [\"history\",\"museums\",\"food\"])",
                "optional": True,
            },
        },
    )
    builder.add_skill(
        name = "flight_search",
        description = "Search for flight options, prices, and schedules between specified locations and dates",
        process = skills.flight_search,
        inputs = {
            "origin": {"type": "Text", "description": "Departure city/airport code"},
            "destination": {"type": "Text", "description": "Destination city/airport code"},
            "departure_date": {"type": "Text", "description": "Departure date (YYYY-MM-DD)"},
            "return_date": {"type": "Text", "description": "Return date (YYYY-MM-DD), optional for one-way", "optional": True},
            "passengers": {"type": "Number", "description": "Number of passengers", "optional": True},
        },
    )
    builder.add_skill(
        name = "accommodation_search",
        description = "Search for hotels, accommodations, and lodging options with pricing and availability",
        process = skills.accommodation_search,
        inputs = {
            "destination": {"type": "Text", "description": "City or area for accommodation"},
            "check_in": {"type": "Text", "description": "Check-in date (YYYY-MM-DD)"},
            "check_out": {"type": "Text", "description": "Check-out date (YYYY-MM-DD)"},
            "guests": {"type": "Number", "description": "Number of guests", "optional": True},
            "budget": {"type": "Number", "description": "Budget range or maximum per night", "optional": True},
        },
    )
    builder.add_skill(
        name = "activity_planning",
        description = "Research and plan activities, restaurants, experiences, and attractions for a destination",
        process = skills.activity_planning,
        inputs = {
            "destination": {"type": "Text", "description": "Destination for activities"},
            "dates": {"type": "Text", "description": "Travel dates for activity planning"},
            "interests": {"type": "Array", "description": "Traveler interests and preferences", "optional": True},
            "group_size": {"type": "Number", "description": "Size of travel group", "optional": True},
        },
    )
    builder.add_skill(
        name = "itinerary_builder",
        description = (
            "Consolidate all travel information into a structured day-by-day itinerary with scheduling and logistics"
        ),
        process = skills.itinerary_builder,
        inputs = {
            "destination": {"type": "Text", "description": "Trip destination"},
            "travel_dates": {"type": "Text", "description": "Complete travel dates"},
            "preferences": {"type": "Array", "description": "Traveler preferences and requirements", "optional": True},
            "gathered_info": {"type": "Text", "description": "All information gathered from previous agents"},
        },
    )
    builder.add_skill(
        name = "budget_calculator",
        description = (
            "Calculate comprehensive trip costs including flights, accommodation, activities, meals, "
            "and miscellaneous expenses"
        ),
        process = skills.budget_calculator,
        inputs = {
            "trip_details": {"type": "Text", "description": "Summary of trip details and planned activities"},
            "duration": {"type": "Number", "description": "Trip duration in days"},
            "group_size": {"type": "Number", "description": "Number of travelers"},
        },
    )
    builder.add_skill(
        name = "context_manager",
        description = (
            "Maintain and update shared context across all planning phases, track completed tasks, "
            "and provide status updates"
        ),
        process = skills.context_manager,
        inputs = {
            "context_data": {"type": "Object", "description": "Current trip planning context", "optional": True},
            "action": {"type": "Text", "description": "Type of context action (update, summarize, analyze)"},
            "update_info": {"type": "Text", "description": "New information to add to context"},
        },
    )
    builder.add_skill(
        name = "search_travel_plans",
        description = "Search through saved travel plans and itineraries",
        process = skills.search_travel_plans,
        inputs = {"query": {"type": "Text", "description": "Search query for travel plans"}},
    )
    builder.add_skill(
        name = "get_destination_insights",
        description = "Retrieve previously researched destination information",
        process = skills.get_destination_insights,
        inputs = {"destination": {"type": "Text", "description": "Destination name to look up"}},
    )
    return builder.build()

"""Gemini-backed assistant ("Hadj").

Only the anonymized summary from `insights.financial_summary` and the
user's own question or investment details go into a prompt. Any failure
from the model is logged and replaced by a fixed message.
"""
from __future__ import annotations
import logging, os
from typing import Any, Callable, Dict, List, Optional
import google.generativeai as genai
from config.settings import GEMINI_MODEL
from .insights import financial_summary
from .models import AppData, Investment

log = logging.getLogger(__name__)

NO_TRANSACTIONS_MESSAGE = 'Start by adding your first income or expense to get personalized insights from Hadj.'
INSIGHTS_FALLBACK = 'Could not fetch insights at this time.'
ANALYSIS_FALLBACK = 'Error: Could not get analysis from AI assistant.'
CHAT_FALLBACK = 'I am unable to respond at the moment. Please try again later.'

ModelFactory = Callable[[Optional[str]], Any]

class HadjAdvisor:
	def __init__(self, model_factory: ModelFactory | None = None, api_key: str | None = None, model_name: str = GEMINI_MODEL):
		self._model_name = model_name
		self._api_key = api_key or os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY')
		self._factory = model_factory or self._gemini_model
		self._configured = False

	def _gemini_model(self, system_instruction: str | None = None) -> Any:
		if not self._configured:
			if not self._api_key:
				log.warning('GEMINI_API_KEY not set; assistant calls will fail')
			genai.configure(api_key=self._api_key)
			self._configured = True
		return genai.GenerativeModel(model_name=self._model_name, system_instruction=system_instruction)

	def dashboard_insights(self, data: AppData) -> str:
		if not data.transactions:
			return NO_TRANSACTIONS_MESSAGE
		prompt = f"""You are "Hadj", a proactive and encouraging financial assistant.
Based on the user's anonymized financial summary for the month, provide one or two brief, actionable, and encouraging insights.
Focus on positive reinforcement or gentle guidance.

**User's Financial Summary (Anonymized):**
{financial_summary(data)}

**Example Responses:**
- "Your savings rate is excellent this month! Keep up the great work."
- "You have a positive cash flow, which is a great foundation for building wealth."

**Your Insight:**"""
		return self._generate(prompt, INSIGHTS_FALLBACK)

	def analyze_investment(self, investment: Investment, data: AppData) -> str:
		prompt = f"""You are "Hadj", a prudent and ethical financial assistant specializing in Halal finance principles.
A user has asked for an analysis of the following investment, given their financial context.
Provide a structured analysis covering profitability, risk, and Sharia compliance, and end with a final recommendation.
Be balanced, wise, and avoid emotional language.

**User's Financial Summary (Anonymized):**
{financial_summary(data)}

**Investment Details:**
- Name: {investment.name}
- Country: {investment.country}
- Sector: {investment.sector}
- Risk Level (as stated by user): {investment.risk_level.value}
- User's notes on Sharia Compliance: "{investment.sharia_compliance_notes}"

**Your Analysis (provide in Markdown format):**
1. **Profitability Potential:**
2. **Risk Assessment:**
3. **Sharia Compliance Analysis:**
4. **Final Recommendation:**"""
		return self._generate(prompt, ANALYSIS_FALLBACK)

	def chat(self, message: str, data: AppData, history: List[Dict[str, Any]] | None = None) -> str:
		"""One chat turn. `history` uses Gemini's [{'role': ..., 'parts': [...]}] shape."""
		system = (
			'You are "Hadj", a prudent and ethical financial assistant specializing in Halal finance principles. '
			f"The user's current financial summary is as follows:\n{financial_summary(data)}\n"
			'Use this context to provide personalized, logical, and unemotional advice. '
			"Do not mention that you have this summary unless it's directly relevant to the user's question."
		)
		try:
			session = self._factory(system).start_chat(history=list(history or []))
			return session.send_message(message).text
		except Exception as e:
			log.error('Gemini chat failed: %s', e)
			return CHAT_FALLBACK

	def _generate(self, prompt: str, fallback: str) -> str:
		try:
			return self._factory(None).generate_content(prompt).text
		except Exception as e:
			log.error('Gemini request failed: %s', e)
			return fallback

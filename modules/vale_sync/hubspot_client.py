"""
HubSpot API client for lead replication.

Pushes Vale leads to HubSpot as CRM contacts (CRM API v3).
"""

import logging
from typing import Optional

import httpx

from .exceptions import HubSpotError
from .models import Lead

logger = logging.getLogger(__name__)


def lead_to_contact_properties(lead: Lead) -> dict:
    """Map a Vale lead onto HubSpot contact properties. Unset fields are left out."""
    properties = {
        'firstname': lead.first_name,
        'lastname': lead.last_name,
        'email': lead.email,
        'phone': lead.phone,
        'address': lead.property_address,
        'city': lead.property_city,
        'state': lead.property_state,
        'zip': lead.property_zip,
        'lifecyclestage': 'lead',
    }
    return {k: v for k, v in properties.items() if v is not None}


class HubSpotClient:
    """HubSpot CRM API client."""

    CONTACTS_ENDPOINT = 'crm/v3/objects/contacts'

    def __init__(
        self,
        access_token: str,
        base_url: str = 'https://api.hubapi.com',
        timeout: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    def _get_headers(self) -> dict:
        """Get request headers."""
        return {
            'Authorization': f'Bearer {self.access_token}',
            'Content-Type': 'application/json',
        }

    def _rest_request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[dict] = None,
    ) -> dict:
        """Make a REST API request. Any failure is raised as HubSpotError."""
        url = f"{self.base_url}/{endpoint}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    url,
                    headers=self._get_headers(),
                    json=json_data,
                )
                response.raise_for_status()

                if response.status_code == 204 or not response.content:
                    return {}

                return response.json()
        except httpx.HTTPStatusError as e:
            raise HubSpotError(f"HubSpot returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise HubSpotError(f"HubSpot request failed: {e}") from e
        except ValueError as e:
            raise HubSpotError("HubSpot returned invalid JSON") from e

    # ==========================================================================
    # Contacts
    # ==========================================================================

    def create_contact(self, properties: dict) -> str:
        """Create a contact. Returns the HubSpot contact id."""
        data = self._rest_request('POST', self.CONTACTS_ENDPOINT, json_data={'properties': properties})
        contact_id = data.get('id')
        if not contact_id:
            raise HubSpotError("HubSpot response carried no contact id")
        return str(contact_id)

    def update_contact(self, contact_id: str, properties: dict) -> str:
        """Update an existing contact. Returns its HubSpot id."""
        data = self._rest_request(
            'PATCH',
            f'{self.CONTACTS_ENDPOINT}/{contact_id}',
            json_data={'properties': properties},
        )
        return str(data.get('id') or contact_id)

    def upsert_contact(self, lead: Lead) -> str:
        """Create or update the contact for a lead. Returns the HubSpot id."""
        properties = lead_to_contact_properties(lead)
        if lead.hubspot_id:
            return self.update_contact(lead.hubspot_id, properties)
        return self.create_contact(properties)

"""
Voice Agent Relay - token issuance and SIP call relay for the OpenAI Realtime API

This application is the backend of a browser voice-agent demo. It keeps the
long-lived provider API key on the server, hands the browser short-lived
tokens, and answers SIP calls the provider routes to the project.

Architecture Overview:
- FastAPI server exposing JSON endpoints for tokens, SIP webhooks and call control
- httpx client for the provider's REST endpoints (client secrets, accept, refer, reject)
- websockets client that monitors each accepted call and sends the greeting

Key Components:
- bot: Call monitor and the registry of its background tasks
- config: Constants, logging setup and RelaySettings
- handlers: Webhook, call-control and token request handlers
- models: Pydantic schemas for webhook events and provider payloads
- services: Provider REST client and call identifier extraction

Getting Started:
1. Set up environment variables:
   - OPENAI_API_KEY: Your OpenAI API key
   - OPENAI_PROJECT_ID: Project id, used to render the SIP URI (optional)
   - PUBLIC_BASE_URL: Public URL of this server, used to render the webhook URL (optional)
   - SIP_FALLBACK_TARGET_URI: Where to refer calls that cannot be accepted (optional)
   - PORT: Port to run the server on (default 3001)
   - LOG_LEVEL: Logging level (default INFO)

2. Start the server:
   ```bash
   python run.py
   ```

3. Point the project's `realtime.call.incoming` webhook at
   http://your-server:3001/api/sip/webhook
"""

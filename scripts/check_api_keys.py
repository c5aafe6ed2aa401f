# scripts/check_api_keys.py
"""Script to validate the gateway's credentials against the upstream providers"""

import asyncio
import aiohttp
import os
from dotenv import load_dotenv

load_dotenv()

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"

async def check_gateway_secret():
    """The gateway refuses to start without API_KEY"""
    if not os.getenv("API_KEY", "").strip():
        return False, "API_KEY not set"
    return True, "OK"

async def check_brave_api():
    """Test Brave Search API"""
    api_key = os.getenv("BRAVE_API_KEY")
    if not api_key:
        return False, "API key not found"

    try:
        async with aiohttp.ClientSession() as session:
            url = os.getenv("BRAVE_SEARCH_URL", BRAVE_SEARCH_URL)
            headers = {
                "Accept": "application/json",
                "X-Subscription-Token": api_key
            }
            params = {"q": "test", "count": 1}

            async with session.get(url, headers=headers, params=params) as response:
                if response.status == 200:
                    data = await response.json()
                    results = data.get("web", {}).get("results", [])
                    return True, f"OK - {len(results)} results"
                elif response.status in (401, 403):
                    return False, "Invalid API key"
                elif response.status == 429:
                    return False, "Rate limit exceeded"
                else:
                    return False, f"HTTP {response.status}"
    except Exception as e:
        return False, str(e)

async def check_ollama(base_url: str, model: str):
    """Test Ollama connection"""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(f"{base_url.rstrip('/')}/api/tags") as response:
                if response.status == 200:
                    data = await response.json()
                    models = [m["name"] for m in data.get("models", [])]
                    if not any(name == model or name.split(":")[0] == model for name in models):
                        return False, f"Model {model} not pulled. Available models: {models}"
                    return True, f"Available models: {models}"
                else:
                    return False, f"HTTP {response.status}"
    except Exception as e:
        return False, str(e)

async def check_openai_compatible(base_url: str, model: str):
    """Test an OpenAI-compatible /models endpoint"""
    api_key = os.getenv("LLM_API_KEY")
    if not api_key:
        return False, "LLM_API_KEY not found"

    try:
        async with aiohttp.ClientSession() as session:
            headers = {"Authorization": f"Bearer {api_key}"}
            async with session.get(f"{base_url.rstrip('/')}/models", headers=headers) as response:
                if response.status == 200:
                    data = await response.json()
                    models = [m.get("id", "") for m in data.get("data", [])]
                    return True, f"OK - model {model}, server lists {len(models)} models"
                elif response.status in (401, 403):
                    return False, "Invalid API key"
                else:
                    return False, f"HTTP {response.status}"
    except Exception as e:
        return False, str(e)

async def main():
    """Check all credentials and upstream connections"""
    print("🔍 Checking API Keys...\n")

    provider = os.getenv("LLM_PROVIDER", "ollama").strip().lower()
    base_url = os.getenv("LLM_BASE_URL", "http://localhost:11434")
    model = os.getenv("LLM_MODEL", "llama3.1")

    if provider == "openai":
        llm_check = ("OpenAI-compatible LLM", check_openai_compatible(base_url, model))
    else:
        llm_check = ("Ollama Service", check_ollama(base_url, model))

    checks = [
        ("Gateway API_KEY", check_gateway_secret()),
        ("Brave Search API", check_brave_api()),
        llm_check
    ]

    results = await asyncio.gather(*[check[1] for check in checks])

    print("📊 API Status Check Results:\n")
    for i, (name, _) in enumerate(checks):
        success, message = results[i]
        status = "✅" if success else "❌"
        print(f"{status} {name}: {message}")

    all_apis_good = all(result[0] for result in results)

    print(f"\n{'🎉 All APIs are working!' if all_apis_good else '⚠️  Some APIs need attention'}")

    if not all_apis_good:
        print("\n💡 Troubleshooting tips:")
        print("- Check your .env file for correct API keys")
        print("- Ensure Ollama is running: ollama serve")
        print(f"- Pull required model: ollama pull {model}")
        print("- Verify network connectivity to external APIs")

if __name__ == "__main__":
    asyncio.run(main())

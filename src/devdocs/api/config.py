"""Config API endpoint."""

from aiohttp import web

from devdocs.app_keys import config_key


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    config = request.app[config_key]
    site = config.site
    return web.json_response(
        {
            "siteName": site.site_name,
            "siteDescription": site.site_description,
            "siteAuthor": site.site_author,
            "siteUrl": site.site_url,
            "repoName": site.repo_name,
            "repoUrl": site.repo_url,
            "copyright": site.copyright,
            "logoPath": site.logo_path,
            "faviconPath": site.favicon_path,
            "theme": {"default": config.theme.default, "options": config.theme.options},
            "searchEnabled": config.search.enabled,
            "liveReloadEnabled": config.live_reload.enabled,
        }
    )

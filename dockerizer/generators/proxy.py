"""nginx reverse-proxy configuration for PHP-FPM frameworks."""

from __future__ import annotations

from pathlib import Path

from dockerizer.generators.output import PROXY_CONF_FILE, write_output

# Upstream is the compose "app" service running PHP-FPM on 9000
NGINX_CONF = """\
server {
    listen 80;
    index index.php index.html;
    server_name localhost;
    error_log  /var/log/nginx/error.log;
    access_log /var/log/nginx/access.log;
    root /var/www/html/public;

    location / {
        try_files $uri $uri/ /index.php?$query_string;
    }

    location ~ \\.php$ {
        try_files $uri =404;
        fastcgi_split_path_info ^(.+\\.php)(/.+)$;
        fastcgi_pass app:9000;
        fastcgi_index index.php;
        include fastcgi_params;
        fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        fastcgi_param PATH_INFO $fastcgi_path_info;
    }
}
"""


def generate_proxy_config(output_dir: str | Path = ".") -> Path:
    """Write ``docker/nginx/conf.d/default.conf`` under ``output_dir``."""
    return write_output(Path(output_dir) / PROXY_CONF_FILE, NGINX_CONF)

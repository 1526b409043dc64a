import re

# host:port[;host:port]* , 兼容逗号分隔
TRACKER_SERVERS_REGEX = re.compile(r"^\s*[^\s:;,]+:\d{1,5}\s*(?:[;,]\s*[^\s:;,]+:\d{1,5}\s*)*$")

TRACKER_SERVER_SEPARATOR_REGEX = re.compile(r"[;,]")

URI_REGEX = re.compile(r"http[s]?://[^/]+(/[^?#]+)?")

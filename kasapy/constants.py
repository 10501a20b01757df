# Protocol
KASA_PORT = 9999
INITIAL_KEY = 0xAB
RECV_BUFFER_SIZE = 4096

# Defaults
DEFAULT_TIMEOUT = 5.0  # seconds
MAX_RANGE_HOSTS = 255
DEFAULT_BIND_IP = "0.0.0.0"

# Discovery probe and reply markers
SYSINFO_COMMAND = '{"system":{"get_sysinfo":{}}}'
ALIAS_MARKER = '"alias":"'
MODEL_MARKER = '"model":"'


# --- Named commands ---
COMMANDS = {
    "info": SYSINFO_COMMAND,
    "on": '{"system":{"set_relay_state":{"state":1}}}',
    "off": '{"system":{"set_relay_state":{"state":0}}}',
    "led_on": '{"system":{"set_led_off":{"off":0}}}',
    "led_off": '{"system":{"set_led_off":{"off":1}}}',
    "cloud_info": '{"cnCloud":{"get_info":{}}}',
    "reboot": '{"system":{"reboot":{"delay":1}}}',
    "time": '{"time":{"get_time":{}}}',
    "schedule": '{"schedule":{"get_rules":{}}}',
    "countdown": '{"count_down":{"get_rules":{}}}',
    "antitheft": '{"anti_theft":{"get_rules":{}}}',
    "wifi_scan": '{"netif":{"get_scaninfo":{"refresh":1}}}',
    "energy": '{"emeter":{"get_realtime":{}}}',
}

"""
Configuration loader for the TV Remote Gateway
Loads and validates configuration from YAML files
"""

import yaml
import logging
from typing import Dict, Any
from pathlib import Path
from datetime import datetime
import pytz

logger = logging.getLogger(__name__)

DEFAULTS = {
    'network': {
        'ssdp_timeout_seconds': 3,
        'ssdp_search_target': 'roku:ecp',
        'ssdp_multicast_address': '239.255.255.250',
        'ssdp_port': 1900,
        'ssdp_descriptor_grace_seconds': 0.5,
        'sweep_default_base': '192.168.0',
        'sweep_first_host': 1,
        'sweep_last_host': 10,
        'probe_timeout_seconds': 1,
        'max_concurrent_probes': 10,
        'request_timeout': 5
    },
    'roku': {
        'port': 8060,
        'text_input_delay_ms': 50
    },
    'samsung': {
        'port': 8001,
        'close_delay_ms': 100,
        'remote_name': 'TV Remote Gateway'
    },
    'registry': {
        'file': 'saved_devices.json'
    },
    'api': {
        'host': '0.0.0.0',
        'port': 3000,
        'cors_origins': ['*'],
        'static_dir': 'public'
    },
    'logging': {
        'level': 'INFO',
        'file': 'logs/remote_gateway.log',
        'console_output': True,
        'timezone': 'UTC'
    }
}

def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation
    """
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")
        
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}
        
        # Validate required sections
        _validate_config(config)
        
        # Apply defaults
        config = _apply_defaults(config)
        
        _validate_sweep_range(config['network'])
        
        logger.info(f"Configuration loaded from {config_path}")
        return config
        
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

def _validate_config(config: Dict) -> None:
    """Validate that required configuration sections exist"""
    required_sections = ['network', 'registry']
    
    for section in required_sections:
        if section not in config or config[section] is None:
            raise ValueError(f"Missing required configuration section: {section}")
    
    registry = config['registry']
    if 'file' in registry and not registry['file']:
        raise ValueError("registry.file must not be empty")

def _validate_sweep_range(network: Dict) -> None:
    first = network['sweep_first_host']
    last = network['sweep_last_host']
    if not (1 <= first <= last <= 254):
        raise ValueError(f"network sweep hosts must satisfy 1 <= first <= last <= 254 (got {first}-{last})")
    if network['max_concurrent_probes'] < 1:
        raise ValueError("network.max_concurrent_probes must be at least 1")

def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""
    for section, defaults in DEFAULTS.items():
        if config.get(section) is None:
            config[section] = {}
        for key, default_value in defaults.items():
            if key not in config[section]:
                config[section][key] = default_value
    
    return config

def get_default_config() -> Dict[str, Any]:
    """Configuration with every default applied, for running without a file"""
    return _apply_defaults({'network': {}, 'registry': {}})


class TimezoneFormatter(logging.Formatter):
    """Formatter rendering timestamps in a configured timezone"""
    
    def __init__(self, fmt=None, tz_name: str = 'UTC'):
        super().__init__(fmt)
        self.tz = pytz.timezone(tz_name)
    
    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            # Default format: YYYY-MM-DD HH:MM:SS TZ
            return dt.strftime('%Y-%m-%d %H:%M:%S %Z')

def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')
    tz_name = log_config.get('timezone', 'UTC')
    
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, tz_name)
    
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=log_format,
        handlers=[]
    )
    
    # Console handler
    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logging.getLogger().addHandler(console_handler)
    
    # File handler
    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
    
    logger.info(f"Logging configured: level={level}, timezone={tz_name}, console={log_config.get('console_output', True)}, file={log_file}")

from formportal.utils.api import CamelModel


class AdminStats(CamelModel):
    total_users: int
    total_agents: int
    total_banks: int
    total_responses: int
    submitted_responses: int
    pending_responses: int


class AgentStats(CamelModel):
    total_responses: int
    submitted_responses: int
    pending_responses: int
    total_users: int
